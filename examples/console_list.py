"""
Console "load more" list.

Fetches pages from a wrapped-response endpoint, prints progress after each
state change and filters the accumulated records by a search term.

Usage:
    python examples/console_list.py https://api.example.com/products lamp
"""

import asyncio
import logging
import sys

from pagefetch import (
    ControllerSnapshot,
    HttpxTransport,
    LoadMode,
    PageFetchController,
    PageFetchError,
    RequestConfig,
    WrappedShape,
)


def render(snapshot: ControllerSnapshot) -> None:
    if snapshot.is_loading:
        print(f"loading page {snapshot.page}...")
        return
    print(f"{len(snapshot.filtered)}/{len(snapshot.items)} records shown, state={snapshot.state.value}")


def report(error: PageFetchError) -> None:
    print(f"[{error.kind.value}] {error.message}", file=sys.stderr)


async def main(endpoint: str, query: str) -> None:
    config = RequestConfig(
        endpoint=endpoint,
        page_size=20,
        params={"sort": "name"},
        response_shape=WrappedShape(status_key="success", data_key="items"),
    )

    async with HttpxTransport(timeout=10.0) as transport:
        controller = PageFetchController(
            config, transport, load_mode=LoadMode.BUTTON, on_error=report
        )
        controller.subscribe(render)
        controller.set_search_query(query)

        await controller.start()
        # Press "load more" until the server runs out or a request fails
        while controller.has_more and controller.last_error is None:
            await controller.load_more()

        for record in controller.filtered:
            print(dict(record))
        controller.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main(sys.argv[1], sys.argv[2] if len(sys.argv) > 2 else ""))
