from __future__ import annotations

from flask import Blueprint, request, g

from api.errors import NotFound
from api.responses import api_response
from api.utils.params import ensure_owner, ensure_valid_id
from models.repositories import tweets, users
from models.schemas.tweet import TweetSchema, TweetOutSchema
from utils.decorators import jwt_required

bp = Blueprint("tweets", __name__, url_prefix="/tweets")

tweet_schema = TweetSchema()
tweet_out_schema = TweetOutSchema()


def _get_tweet_or_404(tweet_id: str):
    ensure_valid_id(tweet_id, "Tweet")
    tweet = tweets.find_by_id(tweet_id)
    if not tweet:
        raise NotFound("Tweet not found")
    return tweet


@bp.post("/")
@jwt_required()
def create_tweet():
    """
    Post a tweet
    ---
    tags:
      - Tweets
    security:
      - Bearer: []
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           required: [content]
           properties:
             content: { type: string, maxLength: 280 }
    responses:
      201: { description: Created }
      400: { description: Validation error }
    """
    data = tweet_schema.load(request.get_json(silent=True) or {})
    tweet = tweets.create(content=data["content"].strip(), owner_id=g.current_user.id)
    return api_response(tweet_out_schema.dump(tweet), "Tweet created successfully", 201)


@bp.get("/user/<user_id>")
@jwt_required()
def user_tweets(user_id: str):
    """
    Tweets by a user, newest first, each with totalLikes
    ---
    tags:
      - Tweets
    security:
      - Bearer: []
    parameters:
      - { in: path, name: user_id, type: string, required: true }
    responses:
      200: { description: OK }
      404: { description: User not found }
    """
    ensure_valid_id(user_id, "User")
    if not users.exists(user_id):
        raise NotFound("User not found")
    items = []
    for tweet, like_count in tweets.for_owner(user_id):
        item = tweet_out_schema.dump(tweet)
        item["totalLikes"] = like_count or 0
        items.append(item)
    return api_response(items, "Tweets fetched successfully")


@bp.patch("/<tweet_id>")
@jwt_required()
def update_tweet(tweet_id: str):
    """
    Edit a tweet (owner only)
    ---
    tags:
      - Tweets
    security:
      - Bearer: []
    responses:
      200: { description: Updated }
      403: { description: Not the owner }
      404: { description: Not found }
    """
    tweet = _get_tweet_or_404(tweet_id)
    data = tweet_schema.load(request.get_json(silent=True) or {})
    ensure_owner(tweet.owner_id, "edit this tweet")
    tweet = tweets.update_by_id(tweet.id, content=data["content"].strip())
    return api_response(tweet_out_schema.dump(tweet), "Tweet updated successfully")


@bp.delete("/<tweet_id>")
@jwt_required()
def delete_tweet(tweet_id: str):
    """
    Delete a tweet (owner only)
    ---
    tags:
      - Tweets
    security:
      - Bearer: []
    responses:
      200: { description: Deleted }
      403: { description: Not the owner }
      404: { description: Not found }
    """
    tweet = _get_tweet_or_404(tweet_id)
    ensure_owner(tweet.owner_id, "delete this tweet")
    tweets.delete_by_id(tweet.id)
    return api_response({}, "Tweet deleted successfully")
