#!/usr/bin/env python3
"""Run script for the StudyHub backend."""

import os
import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "studyhub.api.app:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8787")),
        reload=True
    )
