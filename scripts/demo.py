#!/usr/bin/env python3
"""
Demo script for the offline cache worker.

Runs a worker against a scripted origin (an httpx.MockTransport), then
takes the origin offline to show what each strategy serves.
"""

import asyncio
from dataclasses import replace

import httpx

from offline_cache import (
    ControlMessage,
    HttpxOriginClient,
    InMemoryCacheRepository,
    RequestEntity,
    WorkerConfig,
    WorkerRegistration,
)
from offline_cache.services import CollectingReplyChannel

ORIGIN = "http://calculators.local"

PAGES = {
    "/": b"<h1>Calculators</h1>",
    "/offline.html": b"<h1>You are offline</h1>",
    "/app.js": b"console.log('v1')",
    "/api/rates": b'{"eur": 1.08}',
}


class ScriptedOrigin:
    """Serves PAGES until switched offline."""

    def __init__(self) -> None:
        self.online = True

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if not self.online:
            raise httpx.ConnectError("origin is offline", request=request)
        body = PAGES.get(request.url.path)
        if body is None:
            return httpx.Response(404, content=b"not found")
        return httpx.Response(200, content=body)


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


async def show(registration: WorkerRegistration, request: RequestEntity) -> None:
    response = await registration.dispatch_fetch(request)
    print(f"  {request.method} {request.path:<20} -> {response.status} {response.body[:40]!r}")


async def demo_install(registration: WorkerRegistration, config: WorkerConfig) -> None:
    """Install and activate the first generation."""
    print_section("Install & Activate")

    controller = await registration.register(config)
    print(f"\n📦 {controller.generation}: {controller.state.value}")
    print(f"  Entries stored: {registration.store.count(controller.generation)}")


async def demo_online(registration: WorkerRegistration) -> None:
    """Serve requests while the origin is reachable."""
    print_section("Online")

    print("\n🌐 Requests:")
    await show(registration, RequestEntity(method="GET", url=f"{ORIGIN}/", destination="document"))
    await show(registration, RequestEntity(method="GET", url=f"{ORIGIN}/app.js"))
    await show(registration, RequestEntity(method="GET", url=f"{ORIGIN}/api/rates"))


async def demo_offline(registration: WorkerRegistration, origin: ScriptedOrigin) -> None:
    """Serve the same requests with the origin down."""
    print_section("Offline")

    origin.online = False
    print("\n🔌 Origin switched off. Requests:")
    await show(registration, RequestEntity(method="GET", url=f"{ORIGIN}/", destination="document"))
    await show(registration, RequestEntity(method="GET", url=f"{ORIGIN}/pricing", destination="document"))
    await show(registration, RequestEntity(method="GET", url=f"{ORIGIN}/app.js"))
    await show(registration, RequestEntity(method="GET", url=f"{ORIGIN}/style.css"))
    await show(registration, RequestEntity(method="GET", url=f"{ORIGIN}/api/rates"))
    await show(registration, RequestEntity(method="GET", url=f"{ORIGIN}/api/history?days=7"))
    origin.online = True


async def demo_update(registration: WorkerRegistration, config: WorkerConfig) -> None:
    """Install a new version and promote it with skip-wait."""
    print_section("New Version")

    PAGES["/app.js"] = b"console.log('v2')"
    await registration.register(replace(config, version="1.1.0"))
    print(f"\n⏳ Waiting: {registration.waiting.generation}, active: {registration.active.generation}")

    channel = CollectingReplyChannel()
    await registration.post_message(ControlMessage(type="skip-wait", reply_channel=channel))
    await registration.post_message(ControlMessage(type="get-version", reply_channel=channel))
    for reply in channel.replies:
        print(f"  Reply: {reply.type} success={reply.success} version={reply.version}")

    print(f"  Generations: {[gen.name for gen in registration.store.list_generations()]}")


async def main() -> None:
    """Run all demos."""
    print("\n🚀 Offline Cache Demo")
    print("=" * 70)

    origin = ScriptedOrigin()
    origin_client = HttpxOriginClient(
        client=httpx.AsyncClient(transport=httpx.MockTransport(origin)),
        timeout=1.0,
    )
    registration = WorkerRegistration(store=InMemoryCacheRepository(), origin=origin_client)
    config = WorkerConfig(
        app_id="calculators",
        version="1.0.0",
        origin=ORIGIN,
        resources=("/", "/offline.html", "/app.js"),
    )

    try:
        await demo_install(registration, config)
        await demo_online(registration)
        await demo_offline(registration, origin)
        await demo_update(registration, config)

        print_section("Metrics")
        for name, value in registration.metrics.to_dict().items():
            print(f"  {name}: {value}")

        print("\n" + "=" * 70)
        print("✅ Demo completed successfully!")
        print("=" * 70)
    finally:
        await registration.aclose()
        await origin_client.aclose()


if __name__ == "__main__":
    asyncio.run(main())
