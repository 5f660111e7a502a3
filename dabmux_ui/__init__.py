"""ODR-DabMux 配置与控制界面"""

__version__ = "0.1.0"
