"""
ODR-DabMux GUI 测试套件

测试目录结构:
    tests/
    ├── __init__.py
    ├── conftest.py          # pytest fixtures (进程内 ZMQ 对端)
    ├── test_cli.py          # CLI 入口测试
    ├── test_client.py       # RC 客户端测试
    ├── test_config.py       # 配置加载测试
    ├── test_models.py       # 数据模型与异常测试
    ├── test_params.py       # 参数展平测试
    ├── test_replies.py      # 应答解码测试
    └── test_transport.py    # ZMQ 会话测试
"""
