class WriterOptions:
    def __init__(self, omit_empty_values: bool = False, **kwargs):
        # skip keys whose value is None instead of writing an empty string
        self.omit_empty_values = omit_empty_values
        self.__dict__.update(kwargs)
