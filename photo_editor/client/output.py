# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""Output formatting utilities."""

from datetime import datetime, timezone
from typing import Any, List, Optional


def format_table(
    headers: List[str], rows: List[List[str]], min_widths: Optional[List[int]] = None
) -> str:
    """Format data as a table."""
    if not rows:
        return "No resources found."

    widths = [len(h) for h in headers]
    if min_widths:
        widths = [max(w, mw) for w, mw in zip(widths, min_widths)]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(str(cell)))

    lines = ["  ".join(h.upper().ljust(widths[i]) for i, h in enumerate(headers))]
    for row in rows:
        lines.append("  ".join(str(cell).ljust(widths[i]) for i, cell in enumerate(row)))

    return "\n".join(lines)


def format_age(timestamp: Any, now: Optional[datetime] = None) -> str:
    """Format an ISO timestamp (UTC) as an age string like 5m or 2d."""
    if not timestamp:
        return "Unknown"

    if isinstance(timestamp, datetime):
        dt = timestamp
    else:
        try:
            dt = datetime.fromisoformat(str(timestamp).replace("Z", ""))
        except ValueError:
            return "Unknown"

    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    current = now or datetime.now(timezone.utc).replace(tzinfo=None)
    seconds = (current - dt).total_seconds()

    if seconds < 60:
        return f"{int(max(seconds, 0))}s"
    elif seconds < 3600:
        return f"{int(seconds // 60)}m"
    elif seconds < 86400:
        return f"{int(seconds // 3600)}h"
    else:
        return f"{int(seconds // 86400)}d"
