"""FxA OAuth

Command-line administration of OAuth clients and tokens for a
Firefox Accounts style identity service.
"""

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("fxa-oauth")
except PackageNotFoundError:
    # Running from a source checkout without an install
    __version__ = "0.0.0"
__author__ = "FxA OAuth"
