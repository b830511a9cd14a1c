"""Client for fetching article and newsletter pages."""

from .client import Client


class PageClient(Client):
    """Fetch the HTML of a content page.

    Example:
        with PageClient({"timeout": 30}) as client:
            html = client.fetch("https://www.dailyprincetonian.com/article/...")
    """

    def fetch(self, url: str) -> str:
        """Fetch a page and return its decoded HTML.

        Args:
            url: Absolute URL, or a path relative to base_url

        Returns:
            Response body as text
        """
        return self.get(url).text
