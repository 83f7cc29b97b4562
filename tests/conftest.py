"""Pytest fixtures for dotnet-launch tests."""

import pytest
import sys
import os

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))


@pytest.fixture
def sample_sln():
    """Legacy .sln text with two projects and an explicit configuration block."""
    return """
Microsoft Visual Studio Solution File, Format Version 12.00
# Visual Studio Version 17
Project("{FAE04EC0-301F-11D3-BA7A-00C04FC2CCAE}") = "MyApp", "src\\MyApp\\MyApp.csproj", "{11111111-2222-3333-4444-555555555555}"
EndProject
Project("{FAE04EC0-301F-11D3-BA7A-00C04FC2CCAE}") = "MyApp.Tests", "tests\\MyApp.Tests\\MyApp.Tests.csproj", "{AAAAAAAA-BBBB-CCCC-DDDD-EEEEEEEEEEEE}"
EndProject
Global
	GlobalSection(SolutionConfigurationPlatforms) = preSolution
		Debug|Any CPU = Debug|Any CPU
		Release|Any CPU = Release|Any CPU
		Debug|x64 = Debug|x64
	EndGlobalSection
EndGlobal
"""


@pytest.fixture
def sample_slnx():
    """.slnx text with two projects."""
    return """<?xml version="1.0" encoding="utf-8"?>
<Solution>
  <Folder Name="/src/">
    <Project Path="src/MyApp/MyApp.csproj" />
  </Folder>
  <Project Path="tests/MyApp.Tests/MyApp.Tests.csproj" Type="Classic C#" />
</Solution>
"""


@pytest.fixture
def sample_csproj():
    """Project file with three package references."""
    return """<Project Sdk="Microsoft.NET.Sdk">
  <PropertyGroup>
    <OutputType>Exe</OutputType>
    <TargetFramework>net8.0</TargetFramework>
  </PropertyGroup>
  <ItemGroup>
    <PackageReference Include="Newtonsoft.Json" Version="13.0.3" />
    <PackageReference Include="Serilog" />
    <PackageReference Include="Dapper">
      <Version>2.1.35</Version>
    </PackageReference>
  </ItemGroup>
</Project>
"""


@pytest.fixture
def solution_tree(tmp_path, sample_sln, sample_csproj):
    """A solution on disk: MyApp with packages, MyApp.Tests without a project file."""
    (tmp_path / "MyApp.sln").write_text(sample_sln, encoding="utf-8")
    app_dir = tmp_path / "src" / "MyApp"
    app_dir.mkdir(parents=True)
    (app_dir / "MyApp.csproj").write_text(sample_csproj, encoding="utf-8")
    return tmp_path
