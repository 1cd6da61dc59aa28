"""Go-link redirect service.

Short aliases resolve to destination URLs, optionally parameterized by the
words typed after the alias:
    go/jira 1234 -> https://jira.example.com/browse/1234
"""
