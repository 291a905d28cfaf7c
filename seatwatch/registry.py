from seatwatch import config
from seatwatch.utils.proxies import ProxyRotator, load_proxies
from seatwatch.venues.wanda import WandaFetcher


def get_fetcher(proxies_path=None):
    """Build the Wanda fetcher, rotating through proxies when a list is configured."""
    proxies = load_proxies(proxies_path or config.PROXIES_PATH)
    return WandaFetcher(ProxyRotator(proxies))
