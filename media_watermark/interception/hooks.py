from collections.abc import Callable, MutableMapping
from typing import Any

from media_watermark.logging.logger import Log

Params = MutableMapping[str, Any]
Hook = Callable[[Params], object]


class BeforeActionRegistry:
    """Hooks a host framework runs before a controller action's handler.

    Each hook is registered at most once per action and runs exactly once per
    request, before the handler sees the parameters.
    """

    def __init__(self) -> None:
        self._hooks: dict[str, list[Hook]] = {}

    def register(self, action: str, hook: Hook) -> bool:
        """Register ``hook`` for ``action``. Returns False if already registered."""
        hooks = self._hooks.setdefault(action, [])
        if hook in hooks:
            return False
        # Prepended: watermarking must see the upload before other hooks.
        hooks.insert(0, hook)
        Log.debug(f"registered before-{action} hook {getattr(hook, '__qualname__', hook)}")
        return True

    def hooks_for(self, action: str) -> list[Hook]:
        return list(self._hooks.get(action, []))

    def run(self, action: str, params: Params) -> Params:
        """Run the hooks for ``action`` against ``params`` in place."""
        for hook in self.hooks_for(action):
            hook(params)
        return params
