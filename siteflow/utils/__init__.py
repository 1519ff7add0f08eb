"""SiteFlow 工具包."""
