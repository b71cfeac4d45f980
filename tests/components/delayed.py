import asyncio
import time


def register(registration, config, path):
    async def build():
        await asyncio.sleep(0.1)
        return {"name": "delayed", "time": time.monotonic()}

    registration.component(build)
