"""站点模式视图."""
