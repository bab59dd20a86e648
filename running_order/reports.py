import pandas as pd

SCHEDULE_COLUMNS = ['#', 'Performance', 'Performers', 'Warning']
COMPARISON_COLUMNS = ['Variation', 'Warnings', 'Violation Score', 'First 3', 'Last 3']


def warning_messages(result):
    """Warning text per schedule position ('' where there is none)."""
    messages = [''] * len(result.schedule)
    for w in result.warnings:
        messages[w.position] = w.message
    return messages


def schedule_frame(result):
    messages = warning_messages(result)
    data = []
    for i, r in enumerate(result.schedule):
        data.append({
            '#': i + 1,
            'Performance': r.name,
            'Performers': ', '.join(r.performers),
            'Warning': messages[i],
        })
    return pd.DataFrame(data, columns=SCHEDULE_COLUMNS)


def summary(result):
    return {
        'Variation': result.label,
        'Warnings': len(result.warnings),
        'Violation Score': result.score,
    }


def comparison_frame(rows):
    data = []
    for row in rows:
        data.append({
            'Variation': row.index,
            'Warnings': row.warning_count,
            'Violation Score': row.score,
            'First 3': ', '.join(row.first_three),
            'Last 3': ', '.join(row.last_three),
        })
    return pd.DataFrame(data, columns=COMPARISON_COLUMNS)


def best_row(rows):
    """Lowest score, then fewest warnings; None when there is nothing to compare."""
    if not rows:
        return None
    return min(rows, key=lambda r: (r.score, r.warning_count, r.index))
