"""Shared workflow layer between CLI and Telegram."""

from typing import Awaitable, Callable, TypeVar

from .adapters import SupabaseAuth, SupabaseStore
from .config import Config
from .dashboard import DashboardView

T = TypeVar("T")


def build_dashboard(config: Config) -> DashboardView:
    """Wire a dashboard to the Supabase adapters."""
    auth = SupabaseAuth(config)
    return DashboardView(auth, SupabaseStore(config, auth))


async def run_with_dashboard(
    view: DashboardView, action: Callable[[DashboardView], Awaitable[T]]
) -> T:
    """Mount the view, wait for its initial loads, run action, then close."""
    view.mount()
    try:
        await view.wait_until_loaded()
        await view.session.resolved.wait()
        await view.goals.resolved.wait()
        return await action(view)
    finally:
        await view.settle()
        await view.close()
