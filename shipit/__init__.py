"""shipit: bump a version tag and trigger the release workflow."""

__version__ = "0.1.0"
