from __future__ import annotations

from flask import Blueprint, g

from api.errors import NotFound, RequestValidationError
from api.responses import api_response
from api.utils.params import ensure_valid_id
from models.repositories import subscriptions, users
from models.schemas.common import OwnerSchema
from models.schemas.subscription import SubscriptionOutSchema
from utils.decorators import jwt_required

bp = Blueprint("subscriptions", __name__, url_prefix="/subscriptions")

subscription_out_schema = SubscriptionOutSchema()
profiles_schema = OwnerSchema(many=True)


@bp.post("/c/<channel_id>")
@jwt_required()
def toggle_subscription(channel_id: str):
    """
    Subscribe to or unsubscribe from a channel
    ---
    tags:
      - Subscriptions
    security:
      - Bearer: []
    parameters:
      - { in: path, name: channel_id, type: string, required: true }
    responses:
      201: { description: Subscribed }
      200: { description: Unsubscribed }
      400: { description: Invalid Channel ID or self-subscription }
      404: { description: Channel not found }
    """
    ensure_valid_id(channel_id, "Channel")
    subscriber_id = g.current_user.id
    if channel_id == subscriber_id:
        raise RequestValidationError("You cannot subscribe to your own channel")
    if not users.exists(channel_id):
        raise NotFound("Channel not found")

    existing = subscriptions.find_one(subscriber_id=subscriber_id, channel_id=channel_id)
    if existing:
        subscriptions.delete(existing)
        return api_response({"isSubscribed": False}, "Unsubscribed successfully")

    subscription = subscriptions.create(subscriber_id=subscriber_id, channel_id=channel_id)
    payload = subscription_out_schema.dump(subscription)
    payload["isSubscribed"] = True
    return api_response(payload, "Subscribed successfully", 201)


@bp.get("/c/<channel_id>")
@jwt_required()
def channel_subscribers(channel_id: str):
    """
    Subscribers of a channel
    ---
    tags:
      - Subscriptions
    security:
      - Bearer: []
    parameters:
      - { in: path, name: channel_id, type: string, required: true }
    responses:
      200: { description: OK }
      404: { description: Channel not found }
    """
    ensure_valid_id(channel_id, "Channel")
    if not users.exists(channel_id):
        raise NotFound("Channel not found")
    rows = subscriptions.subscribers(channel_id)
    return api_response(
        {"subscribers": profiles_schema.dump(rows), "totalSubscribers": len(rows)},
        "Subscribers fetched successfully",
    )


@bp.get("/u/<subscriber_id>")
@jwt_required()
def subscribed_channels(subscriber_id: str):
    """
    Channels a user subscribes to
    ---
    tags:
      - Subscriptions
    security:
      - Bearer: []
    parameters:
      - { in: path, name: subscriber_id, type: string, required: true }
    responses:
      200: { description: OK }
      404: { description: User not found }
    """
    ensure_valid_id(subscriber_id, "Subscriber")
    if not users.exists(subscriber_id):
        raise NotFound("User not found")
    rows = subscriptions.subscribed_channels(subscriber_id)
    return api_response(
        {"channels": profiles_schema.dump(rows), "totalChannels": len(rows)},
        "Subscribed channels fetched successfully",
    )
