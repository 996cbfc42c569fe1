"""
业务模块目录
"""
