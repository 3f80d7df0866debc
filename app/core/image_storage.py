"""Object storage for project screenshots and avatars (S3 when configured, else Supabase Storage)."""
import boto3
from botocore.exceptions import ClientError
from fastapi import HTTPException, UploadFile
from supabase import Client
from app.config import settings
from app.config.content_config import ALLOWED_IMAGE_TYPES, MESSAGES
from typing import Optional, Tuple
import logging

logger = logging.getLogger(__name__)


class S3ImageStorage:
    def __init__(self):
        if not settings.s3_enabled:
            raise ValueError("AWS S3 credentials and bucket name must be configured")

        self.s3_client = boto3.client(
            's3',
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            region_name=settings.aws_region
        )
        self.bucket_name = settings.s3_bucket_name
        self.base_url = f"https://{self.bucket_name}.s3.{settings.aws_region}.amazonaws.com/"

    def upload_file(self, file_content: bytes, key: str, content_type: str) -> str:
        """Upload image to S3 and return its public URL"""
        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=key,
                Body=file_content,
                ContentType=content_type
            )
            return f"{self.base_url}{key}"
        except ClientError as e:
            logger.error(f"Failed to upload image to S3: {str(e)}")
            raise

    def delete_by_url(self, url: str) -> bool:
        """Delete an image previously returned by upload_file; foreign URLs are ignored"""
        if not url or not url.startswith(self.base_url):
            return False
        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=url[len(self.base_url):])
            return True
        except ClientError as e:
            logger.error(f"Failed to delete image from S3: {str(e)}")
            return False


class SupabaseImageStorage:
    def __init__(self, supabase: Client, bucket_name: Optional[str] = None):
        self.supabase = supabase
        self.bucket_name = bucket_name or settings.image_bucket
        self.marker = f"/storage/v1/object/public/{self.bucket_name}/"

    def upload_file(self, file_content: bytes, key: str, content_type: str) -> str:
        """Upload image to the public bucket and return its public URL"""
        bucket = self.supabase.storage.from_(self.bucket_name)
        bucket.upload(key, file_content, {"content-type": content_type, "upsert": "true"})
        return bucket.get_public_url(key)

    def delete_by_url(self, url: str) -> bool:
        if not url or self.marker not in url:
            return False
        key = url.split(self.marker, 1)[1].split("?", 1)[0]
        try:
            self.supabase.storage.from_(self.bucket_name).remove([key])
            return True
        except Exception as e:
            logger.warning("Failed to delete from Supabase Storage (%s): %s", key, e)
            return False


def get_image_storage(supabase: Client):
    if settings.s3_enabled:
        try:
            return S3ImageStorage()
        except Exception as e:
            logger.warning(f"S3 storage initialization failed ({str(e)}), will use Supabase Storage")
    return SupabaseImageStorage(supabase)


async def read_image_upload(file: UploadFile) -> Tuple[bytes, str, str]:
    """Validate an uploaded image; returns (content, extension, content_type)"""
    content_type = (file.content_type or "").lower()
    extension = ALLOWED_IMAGE_TYPES.get(content_type)
    if not extension:
        raise HTTPException(status_code=400, detail=MESSAGES["image_invalid_type"])
    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail=MESSAGES["image_invalid_type"])
    if len(content) > settings.max_image_size:
        raise HTTPException(status_code=413, detail=MESSAGES["image_too_large"])
    return content, extension, content_type
