"""内置站点区域.

导入即登记: 每个区域子包在导入时通过 ``@site_page`` 把页面类写入全局注册表.
"""

from siteflow.areas import shop  # noqa: F401
