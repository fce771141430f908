#!/usr/bin/env python3
"""Start the FakeShop API server with uvicorn."""

import uvicorn

from fakeshop.core.config import get_settings

if __name__ == '__main__':
    settings = get_settings()
    print(f"Application is running on: http://localhost:{settings.port}")
    print(f"Swagger documentation is available at: http://localhost:{settings.port}/docs")
    uvicorn.run(
        'fakeshop.main:app',
        host='0.0.0.0',
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
