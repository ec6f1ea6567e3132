from permute_harness.backend.registry import EngineRegistry
from permute_harness.backend.device import EnvironmentSniffer


def check():
    engines = EngineRegistry.get_all_engines()
    for backend, engine_cls in engines.items():
        print(f"Backend: {backend.value}")
        print(f"  Engine: {engine_cls.__name__}")
        print(f"  Available: {engine_cls.is_available()}")
        if engine_cls.is_available():
            env = EnvironmentSniffer.sniff(backend)
            caps = env["capabilities"]
            print(f"  Hardware: {env['hardware_name']}")
            print(f"  f16/f32/f64: {caps.f16}/{caps.f32}/{caps.f64}")
            print(f"  Memory: {caps.memory_bytes / 2**30:.1f} GiB")


if __name__ == "__main__":
    check()
