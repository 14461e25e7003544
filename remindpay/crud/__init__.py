from .user import user
