"""基础设施层: 请求日志中间件与结构化日志助手."""
