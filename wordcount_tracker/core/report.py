"""
Report formatting.

Renders header and per-document lines from snapshots using #{name}
placeholder templates.
"""

from typing import Dict, Iterable, List

from wordcount_tracker.config.loader import TrackerConfig
from .snapshot import DocumentSnapshot


def _fill(template: str, values: Dict[str, str]) -> str:
    """Replace every #{name} placeholder with its value."""
    for name, value in values.items():
        template = template.replace("#{" + name + "}", value)
    return template


def render_header(snapshots: Iterable[DocumentSnapshot], config: TrackerConfig) -> str:
    """Render the summary line for all documents.
    
    Args:
        snapshots: Snapshots included in the report
        config: Tracker configuration holding the formats and the goal
        
    Returns:
        Header line, or an empty string when the header format is empty
    """
    if not config.format_header:
        return ""
    
    snapshots = list(snapshots)
    total = sum(s.words for s in snapshots)
    today = sum(s.today for s in snapshots)
    
    goal_output = ""
    if config.goal > 0:
        goal_output = _fill(config.format_goal, {
            "target": str(config.goal),
            "remaining": str(config.goal - today),
        })
    
    return _fill(config.format_header, {
        "total": str(total),
        "today": str(today),
        "goal": goal_output,
    })


def render_items(snapshots: Iterable[DocumentSnapshot], config: TrackerConfig) -> List[str]:
    """Render one line per document, ordered by path.
    
    Args:
        snapshots: Snapshots included in the report
        config: Tracker configuration holding the item format
        
    Returns:
        Item lines; empty when the item format is empty
    """
    if not config.format_item:
        return []
    
    return [
        _fill(config.format_item, {
            "path": s.path,
            "total": str(s.words),
            "prev": str(s.previous),
            "today": str(s.today),
        })
        for s in sorted(snapshots, key=lambda s: s.path)
    ]
