from fastapi import HTTPException, status


class UnauthorizedError(HTTPException):
    def __init__(self, detail: str = "Unauthorized"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class NotFoundError(HTTPException):
    def __init__(self, detail: str = "Registration not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ValidationError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class ConflictError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class UpstreamFailure(HTTPException):
    """
    A database or storage call failed. The upstream message is forwarded
    verbatim so operators can diagnose it from the response.
    """

    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)


class BucketNotFoundError(UpstreamFailure):
    def __init__(self, bucket: str):
        self.bucket = bucket
        super().__init__(
            f'The specified bucket "{bucket}" does not exist. '
            "Please check the bucket name in the PHOTOS_BUCKET environment variable."
        )


class ObjectNotFoundError(UpstreamFailure):
    def __init__(self, bucket: str, key: str):
        self.bucket = bucket
        self.key = key
        super().__init__(f'File "{key}" not found in bucket "{bucket}".')


class StoragePermissionError(UpstreamFailure):
    def __init__(self, bucket: str):
        self.bucket = bucket
        super().__init__(
            "Permission denied. The storage credentials need read access "
            f'(s3:GetObject, s3:ListBucket) on bucket "{bucket}". '
            "Check the bucket access policy."
        )
