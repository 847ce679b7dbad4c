"""Static asset mount."""

import os

from starlette.staticfiles import StaticFiles


class StaticAssets(StaticFiles):
    """Serve static assets, answering 404 while the directory does not exist."""

    async def check_config(self) -> None:
        if self.directory is not None and not os.path.isdir(self.directory):
            return
        await super().check_config()
