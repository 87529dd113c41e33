# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import os

from authcore.app import create_app

if __name__ == "__main__":
    create_app().run(
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "5000")),
        threaded=True,
    )
