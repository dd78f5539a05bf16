"""
CEP Gateway - 巴西邮政编码（CEP）地址查询网关

多个外部地址服务之间轮转 + 故障转移，查询结果带 TTL 缓存。
"""

__version__ = "0.1.0"
