"""SiteFlow 路由蓝图."""
