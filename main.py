#!/usr/bin/env python3
"""
IBD Field Designer
Entry point: serves the design API

Version: 0.1.0
"""

import os

import uvicorn


def main():
    """Launch the API server"""
    uvicorn.run(
        "backend.main:app",
        host=os.environ.get("IBD_HOST", "127.0.0.1"),
        port=int(os.environ.get("IBD_PORT", "8000")),
    )


if __name__ == '__main__':
    main()
