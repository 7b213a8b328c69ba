"""Object storage: a flat keyspace per bucket, backed by the local filesystem."""

import os
from pathlib import Path

from fastapi import UploadFile

from duet.config import get_settings
from duet.errors import StorageError

PUBLIC_PATH = "/storage/v1/object/public"


class StorageService:
    """Stores uploaded objects and hands out unauthenticated public URLs."""

    def _bucket_dir(self, bucket: str) -> Path:
        return Path(get_settings().STORAGE_DIR) / bucket

    def resolve(self, bucket: str, key: str) -> Path | None:
        """Map bucket/key to a file path. Returns None for keys escaping the bucket or missing objects."""
        root = Path(get_settings().STORAGE_DIR).resolve()
        bucket_dir = self._bucket_dir(bucket).resolve()
        path = (bucket_dir / key).resolve()
        if root not in bucket_dir.parents or bucket_dir not in path.parents or not path.is_file():
            return None
        return path

    async def put(self, bucket: str, key: str, upload: UploadFile, max_bytes: int) -> int:
        """Stream an upload into bucket/key. Returns the stored size in bytes.

        Raises ValueError if the upload exceeds max_bytes (nothing is kept) and
        StorageError if the key already exists or the write fails.
        """
        file_path = self._bucket_dir(bucket) / key
        file_size = 0
        chunk_size = 1024 * 64  # 64KB chunks

        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            # "x" refuses to overwrite an existing object
            with open(file_path, "xb") as f:
                while True:
                    chunk = await upload.read(chunk_size)
                    if not chunk:
                        break
                    file_size += len(chunk)
                    if file_size > max_bytes:
                        raise ValueError(
                            f"File too large ({file_size // (1024 * 1024)}MB). "
                            f"Maximum: {max_bytes // (1024 * 1024)}MB"
                        )
                    f.write(chunk)
        except FileExistsError as e:
            raise StorageError("The resource already exists") from e
        except ValueError:
            if file_path.exists():
                os.remove(file_path)
            raise
        except OSError as e:
            if file_path.exists():
                os.remove(file_path)
            raise StorageError(str(e)) from e

        return file_size

    def public_url(self, bucket: str, key: str) -> str:
        base = get_settings().PUBLIC_BASE_URL.rstrip("/")
        return f"{base}{PUBLIC_PATH}/{bucket}/{key}"


_storage_service: StorageService | None = None


def get_storage_service() -> StorageService:
    """Get singleton storage service instance."""
    global _storage_service
    if _storage_service is None:
        _storage_service = StorageService()
    return _storage_service
