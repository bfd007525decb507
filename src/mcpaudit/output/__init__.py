"""Report renderers: JSON, SARIF, CSV, Markdown, and the terminal view."""
