from typing import List, Literal
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    PROJECT_NAME: str = "Blogsphere API"
    API_PREFIX: str = "/api/v1"
    DATABASE_URL: str = "sqlite:///./blogsphere.db"
    SECRET_KEY: str = "supersecretkey_change_me_in_production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7 # 1 week

    # Uploaded media
    STORAGE_BACKEND: Literal["local", "s3"] = "local"
    STORAGE_ROOT: str = "./storage"
    STORAGE_URL_PREFIX: str = "/storage"
    MAX_UPLOAD_SIZE_KB: int = 2048

    # AWS S3 (only read when STORAGE_BACKEND=s3)
    AWS_ACCESS_KEY_ID: str = ""
    AWS_SECRET_ACCESS_KEY: str = ""
    AWS_REGION: str = "ap-south-1"
    S3_BUCKET: str = "blogsphere-uploads"

    # "user": a blog sits in at most one of the acting user's folders.
    # "global": a blog sits in at most one folder across all users.
    FOLDER_UNIQUENESS_SCOPE: Literal["user", "global"] = "user"

    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    @property
    def MAX_UPLOAD_SIZE_BYTES(self) -> int:
        return self.MAX_UPLOAD_SIZE_KB * 1024

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
