"""
Priority-ordered hook registry for render pipelines

Each hook name maps to an ordered list of stages. A stage receives the
payload returned by the previous stage and returns the (possibly modified)
payload for the next one. Stages may be plain functions or coroutines.

Ordering:
- Lower priority runs first (default priority is 10)
- Equal priorities keep registration order

Stages are registered once during startup; the lists are not meant to change
while renders are running.

Example:
    >>> import asyncio
    >>> hooks = HookRegistry()
    >>> hooks.register(HookSpec(hook="filter:parse.raw", method=str.upper))
    >>> asyncio.run(hooks.fire("filter:parse.raw", "hi"))
    'HI'
"""

import inspect
from typing import Any, Dict, List

from ..models.content import HookSpec
from .log import LOG


class RenderFailure(RuntimeError):
    """Raised when a pipeline stage fails; the original error is chained"""

    def __init__(self, hook: str, stage: HookSpec, cause: BaseException) -> None:
        self.hook = hook
        self.stage = stage
        self.cause = cause
        name = getattr(stage.method, '__name__', repr(stage.method))
        super().__init__(f"Stage '{name}' ({stage.owner}) failed in '{hook}': {cause}")


class HookRegistry:
    """Registry of pipeline stages keyed by hook name"""

    def __init__(self) -> None:
        self.hooks: Dict[str, List[HookSpec]] = {}
        self.registered = 0

    def register(self, spec: HookSpec) -> None:
        """Register a stage; it is placed after existing stages of equal priority"""
        spec.order = self.registered
        self.registered += 1

        stages = self.hooks.setdefault(spec.hook, [])
        stages.append(spec)
        stages.sort(key=lambda s: (s.priority, s.order))
        LOG(f"Registered {spec.owner} stage on {spec.hook} (priority {spec.priority})", level=3)

    def stages(self, hook: str) -> List[HookSpec]:
        """Return the stages for a hook in execution order"""
        return list(self.hooks.get(hook, []))

    def hasListeners(self, hook: str) -> bool:
        return bool(self.hooks.get(hook))

    async def fire(self, hook: str, payload: Any) -> Any:
        """
        Run every stage of a hook sequentially over the payload

        Args:
            hook: Hook name
            payload: Initial payload

        Returns:
            Payload returned by the last stage (the input if no stages)

        Raises:
            RenderFailure: A stage raised; remaining stages are skipped
        """
        for stage in self.stages(hook):
            try:
                result = stage.method(payload)
                if inspect.isawaitable(result):
                    result = await result
            except Exception as e:
                raise RenderFailure(hook, stage, e) from e
            payload = result
        return payload
