from .constants import (
    RELEASE_HEADER,
    RELEASE_ITEMS_TITLE,
    VIEW_IN_JIRA_ACTION_ID,
    VIEW_IN_JIRA_TEXT,
)


def escape_mrkdwn(text):
    # Slack exige escapar apenas &, < e > no texto mrkdwn
    if not text:
        return ""
    return str(text).replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def format_blocking_line(blocking_issue):
    summary = escape_mrkdwn(blocking_issue.summary)
    if blocking_issue.url:
        return f"• <{blocking_issue.url}|{summary}>"
    return f"• {summary}"


def build_release_blocks(release):
    issue = release.issue
    header = RELEASE_HEADER.format(key=issue.key)
    blocks = [
        {
            "type": "section",
            "text": {
                "type": "mrkdwn",
                "text": f"{header}\n*{escape_mrkdwn(issue.summary)}*",
            },
        }
    ]

    if release.blocking_issues:
        lines = "\n".join(format_blocking_line(b) for b in release.blocking_issues)
        blocks.append({
            "type": "section",
            "text": {
                "type": "mrkdwn",
                "text": f"{RELEASE_ITEMS_TITLE}\n{lines}",
            },
        })

    blocks.append({
        "type": "actions",
        "elements": [
            {
                "type": "button",
                "text": {"type": "plain_text", "text": VIEW_IN_JIRA_TEXT},
                "url": issue.url,
                "action_id": VIEW_IN_JIRA_ACTION_ID,
            }
        ],
    })
    return blocks


def build_release_message(release):
    return {
        "text": RELEASE_HEADER.format(key=release.issue.key),
        "blocks": build_release_blocks(release),
    }
