"""CareLink HMS - hospital management API."""

import uvicorn

from carelink.config import settings


if __name__ == "__main__":
    uvicorn.run(
        "carelink.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.DEBUG,
    )
