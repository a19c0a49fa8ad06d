"""
Entry point for the desktop UI (`birdapi-ui`).

The service address comes from API_BASE_URL (see birdapi.config) or the
--api-url option.
"""

import argparse
import logging
import sys
import tkinter as tk

from birdapi.client.bird_api_client import BirdApiClient
from birdapi.config import settings
from birdapi.ui.presenter import BirdPresenter
from birdapi.ui.view import BirdApiView


def setup_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Bird Sightings desktop client")
    parser.add_argument("--api-url", default=settings.api_base_url,
                        help="Service address including /api/v1 (default: %(default)s)")
    args = parser.parse_args(argv)

    setup_logging()
    root = tk.Tk()
    root.geometry("1100x650")

    with BirdApiClient(base_url=args.api_url) as client:
        view = BirdApiView(root)
        presenter = BirdPresenter(client, view)
        view.bind(presenter)
        presenter.refresh_birds()
        root.mainloop()


if __name__ == "__main__":
    main()
