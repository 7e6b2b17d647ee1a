from datetime import UTC, datetime

MOCK_PACKAGE_JSON = """{
  "name": "hello-world",
  "version": "1.0.0",
  "dependencies": {
    "express": "^4.19.2",
    "lodash": "^4.17.21"
  },
  "devDependencies": {
    "jest": "^29.7.0"
  }
}
"""

MOCK_PYPROJECT_TOML = """[project]
name = "hello-python"
version = "0.1.0"
dependencies = [
    "requests>=2.31.0",
    "click>=8.1.0",
    "pydantic[email]>=2.0",
]
"""

MOCK_HELLO_WORLD_FILES: dict[str, str] = {
    "package.json": MOCK_PACKAGE_JSON,
    "index.js": "const express = require('express');\n",
    "LICENSE": "MIT License\n",
    "src/app.js": "module.exports = {};\n",
    "src/routes/users.js": "module.exports = [];\n",
    "test/app.test.js": "test('app', () => {});\n",
    "node_modules/express/index.js": "// vendored\n",
    "package-lock.json": "{}\n",
}

MOCK_UPDATED_AT = datetime(2025, 1, 15, 12, 30, tzinfo=UTC)

# The markdown a generation backend returns for the hello-world repository.
MOCK_README_CONTENT = """# hello-world

A tiny express server that says hello.

## Installation

```bash
npm install
```

## License

MIT
"""
