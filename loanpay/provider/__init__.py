from loanpay.provider.client import PaynectaClient, build_client  # noqa: F401
