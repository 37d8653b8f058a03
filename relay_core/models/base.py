"""
Base model configuration
基础模型配置
"""

from sqlalchemy.orm import declarative_base

# 创建基础模型类
Base = declarative_base()
