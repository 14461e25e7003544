from .user import UserCreate, Token, TokenPayload
