import os

# Keep test runs fast and free of log files
os.environ.setdefault("DEPLOY_DELAY_SECONDS", "0")
os.environ.setdefault("LOG_FILE", os.devnull)

import httpx
import pytest

from models.generation import GeneratedCode

VANILLA_RESPONSE = """Here is your website.

```html
<!DOCTYPE html>
<html lang="en">
<head>
  <title>Bakery</title>
  <link rel="stylesheet" href="styles.css">
</head>
<body>
  <h1>Fresh Bread</h1>
  <script src="main.js"></script>
</body>
</html>
```

```css
body { color: #333; }
```

```javascript
document.querySelector('h1').addEventListener('click', () => alert('hi'));
```

Let me know if you want changes.
"""

REACT_RESPONSE = """```jsx
import React from 'react';

export default function App() {
  return <h1 className="title">Hello</h1>;
}
```

```css
.title { color: blue; }
```

```json
{"name": "bakery", "dependencies": {"react": "^18.0.0"}}
```

```ts
export const first = 1;
```

```js
module.exports = {};
```

```ts
export const second = 2;
```
"""


def llm_reply(text: str) -> dict:
    return {"id": "msg_test", "type": "message", "content": [{"type": "text", "text": text}]}


def make_llm_transport(text: str = VANILLA_RESPONSE, status_code: int = 200, raw_body: str = None, calls: list = None):
    """MockTransport standing in for the LLM endpoint; records requests into `calls`."""
    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        if raw_body is not None:
            return httpx.Response(status_code, text=raw_body)
        return httpx.Response(status_code, json=llm_reply(text))
    return httpx.MockTransport(handler)


def make_code(marker: str = "v1") -> GeneratedCode:
    return GeneratedCode(
        html=f"<p>{marker}</p>",
        css="p { color: red; }",
        javascript=f"console.log('{marker}');",
        full_code=f"<!DOCTYPE html><html><body><p>{marker}</p></body></html>",
        framework="vanilla",
    )


class FakeGenerationService:
    """Returns queued results (GeneratedCode or exceptions) and records every call."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls = []

    async def generate(self, prompt, options=None, conversation=None):
        self.calls.append({"prompt": prompt, "options": options, "conversation": list(conversation or [])})
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def vanilla_response():
    return VANILLA_RESPONSE


@pytest.fixture
def react_response():
    return REACT_RESPONSE
