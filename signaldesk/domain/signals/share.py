"""Social share text for a signal."""

from signaldesk.domain.signals.entities import Signal

SHARE_TITLE = "SIGNALDESK AI SIGNAL"


def format_share_text(signal: Signal) -> str:
    """Render the text posted by the dashboard's share buttons."""
    lines = [
        SHARE_TITLE,
        "",
        f"Pair: {signal.pair}",
        f"Action: {signal.action}",
        f"Confidence: {signal.confidence}%",
        f"Time: {signal.start_time} - {signal.end_time}",
    ]
    if signal.verifiers:
        lines.append(f"Verified by: {', '.join(signal.verifiers)}")
    lines.extend(["", f"Analysis: {signal.analysis}"])
    return "\n".join(lines)
