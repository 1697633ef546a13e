"""PR comment rate analyzer: minutes spent per review comment on GitHub pull requests."""
