"""
博客模块
"""
