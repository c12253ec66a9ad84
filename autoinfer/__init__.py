import importlib

mod = "autoinfer"
class LazyLoader:
    """    
    Lazy loader for the autoinfer functions so pandas is only imported for CSV input.
    """
    def __init__(self, mappings):
        self._modules = {}
        self._mappings = mappings

    def _load_module(self, module_name):
        if module_name not in self._modules:
            self._modules[module_name] = importlib.import_module(module_name)
        return self._modules[module_name]

    def __getattr__(self, item):
        if item in self._mappings:
            module_name, func_name = self._mappings[item]
            module = self._load_module(module_name)
            return getattr(module, func_name)
        else:
            return self._load_module(f"{mod}.{item}")

# Define the functions and their corresponding module paths
_mappings = {
    "classify": (f"{mod}.schema_inference", "classify"),
    "infer_schema": (f"{mod}.schema_inference", "infer_schema"),
    "infer_schema_from_values": (f"{mod}.schema_inference", "infer_schema_from_values"),
    "merge_schemas": (f"{mod}.schema_inference", "merge_schemas"),
    "render_interface": (f"{mod}.schematots", "render_interface"),
    "render_json_schema": (f"{mod}.schematojsons", "render_json_schema"),
    "dedupe_unions": (f"{mod}.union_dedupe", "dedupe_unions"),
    "generate_output": (f"{mod}.generator", "generate_output"),
    "generate_schema": (f"{mod}.generator", "generate_schema"),
    "GenerateOptions": (f"{mod}.generator", "GenerateOptions"),
    "infer_schema_from_json": (f"{mod}.jsontoschema", "infer_schema_from_json"),
    "convert_json_to_typescript": (f"{mod}.jsontoschema", "convert_json_to_typescript"),
    "convert_json_to_json_schema": (f"{mod}.jsontoschema", "convert_json_to_json_schema"),
    "infer_schema_from_csv": (f"{mod}.csvtoschema", "infer_schema_from_csv"),
    "convert_csv_to_schema": (f"{mod}.csvtoschema", "convert_csv_to_schema"),
    "columns_to_schema": (f"{mod}.sqltoschema", "columns_to_schema"),
}

_lazy_loader = LazyLoader(_mappings)

def __getattr__(name):
    return getattr(_lazy_loader, name)
