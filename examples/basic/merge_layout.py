"""Merge page properties into a layout in 3 lines, zero config, zero deps."""

from tagweave import merge

layout = """<html>
<head><title><tw:write property="title">Untitled</tw:write></title></head>
<body><tw:write property="body"/></body>
</html>"""

print(merge(layout, {"title": "Hello", "body": "<p>World</p>"}))
