from models.db_storage import DBStorage

# Engine and session are bound by create_app() through storage.init_app()
storage = DBStorage()
