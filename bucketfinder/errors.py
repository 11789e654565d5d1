class BucketFinderError(Exception):
    pass


class ConfigurationError(BucketFinderError):
    pass


class ProbeError(BucketFinderError):
    def __init__(self, url: str, reason: str):
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class RedirectDepthError(BucketFinderError):
    pass


class DownloadError(BucketFinderError):
    pass
