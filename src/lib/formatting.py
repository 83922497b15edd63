"""
Composer formatting-bar registration for the text color dropdown

Adds a "filter:composer.formatting" stage that inserts a color dropdown
(one item per palette color plus "clear") into the composer's formatting
options. The dropdown item names match the ButtonDispatcher actions.
"""

from typing import Any, Dict, List

from ..models.content import HookSpec
from ..models.markup import PALETTE
from .hooks import HookRegistry


DROPDOWN_POSITION = 2

DEFAULT_VISIBILITY = {
    'mobile': True,
    'desktop': True,
    'main': True,
    'reply': True,
}


def dropdownItems_build() -> List[Dict[str, str]]:
    items = [
        {
            'name': f'textcolor:{name}',
            'text': name.capitalize(),
            'className': f'fa fa-circle text-color-icon text-color-{name}',
        }
        for name in PALETTE
    ]
    items.append({
        'name': 'textcolor:clear',
        'text': 'Clear color',
        'className': 'fa fa-eraser text-color-icon text-color-clear',
    })
    return items


def colorDropdown_present(options: List[Any]) -> bool:
    """Check if any option already carries textcolor:* dropdown items"""
    for option in options:
        if not isinstance(option, dict) or not isinstance(option.get('dropdownItems'), list):
            continue
        for item in option['dropdownItems']:
            name = item.get('name') if isinstance(item, dict) else None
            if isinstance(name, str) and name.startswith('textcolor:'):
                return True
    return False


def formattingOptions_extend(payload: Any) -> Any:
    """
    Insert the color dropdown into a formatting payload

    Args:
        payload: {"options": [...], "defaultVisibility": {...}}

    Returns:
        The payload; unchanged when it has no options list or a color
        dropdown is already present
    """
    if not isinstance(payload, dict) or not isinstance(payload.get('options'), list):
        return payload

    options = payload['options']
    if colorDropdown_present(options):
        return payload

    options.insert(DROPDOWN_POSITION, {
        'title': '[[modules:composer.formatting.color]]',
        'className': 'fa fa-paint-brush',
        'dropdownItems': dropdownItems_build(),
        'visibility': payload.get('defaultVisibility') or dict(DEFAULT_VISIBILITY),
    })
    return payload


def formattingOptions_register(hooks: HookRegistry) -> None:
    """Register the dropdown stage once per registry"""
    for stage in hooks.stages('filter:composer.formatting'):
        if stage.method is formattingOptions_extend:
            return
    hooks.register(HookSpec(hook='filter:composer.formatting', method=formattingOptions_extend))
