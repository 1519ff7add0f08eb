"""SiteFlow - 站点模式路由."""

from flask import Blueprint

from siteflow.views.site_mode_view import SiteModeView

# 创建蓝图
site_bp = Blueprint("site", __name__)

_site_mode_view = SiteModeView.as_view("page")

site_bp.add_url_rule("/<area>/<page>", view_func=_site_mode_view, methods=["GET", "POST"])
site_bp.add_url_rule("/<area>/<page>/<path:inputs>", view_func=_site_mode_view, methods=["GET", "POST"])
