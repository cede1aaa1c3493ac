"""
Prompt templates and context composition
"""

import re
from typing import Any, Mapping


FILE_LOCATION_TEMPLATE = """
{{recentMessages}}

extract the file location from the users message or the attachment in the message history that they are referring to.
your job is to infer the correct attachment based on the recent messages, the users most recent message, and the attachments in the message
image attachments are the result of the users uploads, or images you have created.
only respond with the file location, no other text.
typically the file location is in the form of a URL or a file path.

```json
{
    "fileLocation": "file location text goes here"
}
```
"""

_PLACEHOLDER = re.compile(r"\{\{(\w+)\}\}")


def compose_context(state: Mapping[str, Any], template: str) -> str:
    """
    Fill {{key}} placeholders in a template from conversation state.

    Unknown keys render as empty strings.

    Example:
        >>> compose_context({"recentMessages": "user: hi"}, "{{recentMessages}}!")
        'user: hi!'
    """
    def replace(match: re.Match) -> str:
        value = state.get(match.group(1))
        return "" if value is None else str(value)

    return _PLACEHOLDER.sub(replace, template)
