"""NuGet PackageReference parsing for project files (.csproj, .fsproj, .vbproj)."""

from __future__ import annotations

from .markup import child_text, find_element_end, iter_start_tags
from .models import NuGetPackage

PACKAGE_REFERENCE_ELEMENT = "PackageReference"


def parse_package_references(content: str) -> list[NuGetPackage]:
    """Parse PackageReference items from project file text.

    Accepted forms:
        <PackageReference Include="PackageId" Version="1.0.0" />
        <PackageReference Include="PackageId" />
        <PackageReference Include="PackageId"><Version>1.0.0</Version></PackageReference>

    Entries without an Include attribute are skipped.

    Raises:
        ParseError: If a PackageReference element is never terminated
    """
    packages: list[NuGetPackage] = []

    for tag in iter_start_tags(content, PACKAGE_REFERENCE_ELEMENT):
        element_end = find_element_end(content, tag)

        package_id = tag.get("Include")
        if not package_id:
            continue

        version = tag.get("Version")
        if version is None and not tag.self_closing:
            version = child_text(content, tag.end, element_end, "Version")

        packages.append(NuGetPackage(id=package_id, version=version))

    return packages
