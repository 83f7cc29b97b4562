"""Debug locators: turn build tasks into launchable debug requests."""

from .dotnet import LOCATOR_NAME, DotNetLocator, is_dotnet_command
from .output import find_output_assembly

__all__ = ["LOCATOR_NAME", "DotNetLocator", "find_output_assembly", "is_dotnet_command"]
