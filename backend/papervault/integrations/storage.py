"""Object storage backends for uploaded paper files.

Every backend offers ``save(key, data, content_type) -> url`` and
``delete(key)``. Uploads are all-or-nothing; failures raise StorageError.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Optional, Protocol

import alibabacloud_oss_v2 as oss
from flask import Flask, current_app, url_for
from loguru import logger

from ..errors import StorageError
from .supabase_client import SupabaseExt


class Storage(Protocol):
    def save(self, key: str, data: bytes, content_type: str) -> str: ...

    def delete(self, key: str) -> None: ...


class SupabaseStorage:
    def __init__(self, supabase: SupabaseExt, bucket: str) -> None:
        self.supabase = supabase
        self.bucket = bucket

    def _bucket(self):
        client = self.supabase.client
        if client is None:
            raise StorageError("Supabase client is not initialized; set SUPABASE_URL and a key.")
        return client.storage.from_(self.bucket)

    def save(self, key: str, data: bytes, content_type: str) -> str:
        bucket = self._bucket()
        try:
            bucket.upload(key, data, {"content-type": content_type, "upsert": "false"})
        except Exception as e:
            raise StorageError(f"supabase upload failed for {key}: {e}") from e
        return bucket.get_public_url(key)

    def delete(self, key: str) -> None:
        try:
            self._bucket().remove([key])
        except Exception as e:
            raise StorageError(f"supabase remove failed for {key}: {e}") from e


class OSSStorage:
    def __init__(self, *, region: str, endpoint: Optional[str], bucket: str) -> None:
        cfg = oss.config.load_default()
        cfg.credentials_provider = oss.credentials.EnvironmentVariableCredentialsProvider()
        cfg.region = region
        if endpoint:
            cfg.endpoint = endpoint
        self.client = oss.Client(cfg)
        self.bucket = bucket
        self.endpoint = endpoint

    def save(self, key: str, data: bytes, content_type: str) -> str:
        try:
            self.client.put_object(
                oss.PutObjectRequest(bucket=self.bucket, key=key, body=data, content_type=content_type)
            )
        except Exception as e:
            raise StorageError(f"oss upload failed for {key}: {e}") from e
        return f"https://{self.bucket}.{self.endpoint}/{key}"

    def delete(self, key: str) -> None:
        try:
            self.client.delete_object(oss.DeleteObjectRequest(bucket=self.bucket, key=key))
        except Exception as e:
            raise StorageError(f"oss delete failed for {key}: {e}") from e


class LocalStorage:
    """Files under a local directory, served back through the ``legacy.download`` route."""

    def __init__(self, root: str) -> None:
        self.root = Path(root).resolve()

    def path_for(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if self.root not in path.parents:
            raise StorageError(f"key escapes storage root: {key}")
        return path

    def save(self, key: str, data: bytes, content_type: str) -> str:
        path = self.path_for(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp = path.with_suffix(path.suffix + ".part")
            tmp.write_bytes(data)
            os.replace(tmp, path)
        except OSError as e:
            raise StorageError(f"local write failed for {key}: {e}") from e
        return url_for("legacy.download", key=key, _external=True)

    def delete(self, key: str) -> None:
        try:
            self.path_for(key).unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"local delete failed for {key}: {e}") from e


def init_storage(app: Flask, supabase: SupabaseExt) -> Storage:
    backend = (app.config.get("STORAGE_BACKEND") or "supabase").lower()
    storage: Storage
    if backend == "supabase":
        storage = SupabaseStorage(supabase, app.config["STORAGE_BUCKET"])
    elif backend == "oss":
        missing = [k for k in ("ALIYUN_OSS_REGION", "ALIYUN_OSS_BUCKET_NAME") if not app.config.get(k)]
        if missing:
            raise RuntimeError(f"Aliyun OSS is not configured, missing: {', '.join(missing)}")
        storage = OSSStorage(
            region=app.config["ALIYUN_OSS_REGION"],
            endpoint=app.config.get("ALIYUN_OSS_ENDPOINT"),
            bucket=app.config["ALIYUN_OSS_BUCKET_NAME"],
        )
    elif backend == "local":
        storage = LocalStorage(app.config["STORAGE_LOCAL_PATH"])
    else:
        raise ValueError(f"unsupported storage backend: {backend}")
    logger.info("object storage backend: {}", backend)
    app.extensions["storage"] = storage
    return storage


def current_storage() -> Storage:
    return current_app.extensions["storage"]
