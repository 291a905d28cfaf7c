import json


def load_proxies(path):
    """
    Load the proxy list (a JSON array of proxy URLs).
    Missing file means requests go out directly.
    """
    if not path.exists():
        return []
    with open(path, "r") as f:
        proxies = json.load(f)
    if not isinstance(proxies, list):
        raise ValueError(f"{path} must contain a JSON array of proxy URLs")
    return [p for p in proxies if p]


class ProxyRotator:
    """Round-robin over the configured proxies."""

    def __init__(self, proxies):
        self.proxies = list(proxies)
        self.idx = 0

    def next(self):
        if not self.proxies:
            return None
        proxy = self.proxies[self.idx]
        self.idx = (self.idx + 1) % len(self.proxies)
        return proxy
