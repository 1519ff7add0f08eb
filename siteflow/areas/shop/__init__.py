"""shop 区域页面."""

from siteflow.areas.shop import checkout  # noqa: F401
