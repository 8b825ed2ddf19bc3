"""
Utilities for obtaining a client configuration.

Client classes in this package are configured with plain dictionaries; this module provides the
means to read such a dictionary from a file and to combine it with default values.
"""
import os, json
from collections.abc import Mapping
from copy import deepcopy

import yaml

class ConfigurationException(Exception):
    """
    a class indicating an error in the configuration of a client
    """
    def __init__(self, message: str=None, param: str=None, cause: Exception=None):
        """
        create the exception

        :param str   message:  a description of the configuration problem
        :param str     param:  the name of the configuration parameter at fault
        :param Exception cause:  the underlying exception that was raised (if any)
        """
        if not message:
            message = "Configuration error"
            if param:
                message += f" with parameter {param}"
            if cause:
                message += ": " + str(cause)
        super(ConfigurationException, self).__init__(message)
        self.param = param
        self.cause = cause

def load_from_file(configfile: str) -> Mapping:
    """
    read the configuration from the given file and return it as a dictionary.  The file format
    is determined from the file extension:  YAML for ".yml" and ".yaml", JSON for ".json".

    :raises ConfigurationException:  if the file format is unsupported
    :raises ValueError:  if the file contents contain syntax errors
    :raises OSError:     if the file cannot be opened or read
    """
    ext = os.path.splitext(str(configfile))[1].lower()
    with open(configfile) as fd:
        if ext in (".yml", ".yaml"):
            try:
                data = yaml.safe_load(fd)
            except yaml.YAMLError as ex:
                raise ValueError(f"{configfile}: YAML syntax error: {str(ex)}") from ex
        elif ext == ".json":
            data = json.load(fd)
        else:
            raise ConfigurationException(f"{configfile}: unsupported config file format: {ext}")

    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise ConfigurationException(f"{configfile}: config file does not contain an object")
    return data

def merge_config(primary: Mapping, defconf: Mapping) -> Mapping:
    """
    merge the primary configuration on top of a default configuration and return the result.
    Values that are themselves dictionaries are merged recursively; all other values in the
    primary configuration replace those in the default.  Neither input is modified.
    """
    out = deepcopy(defconf)
    for key, val in primary.items():
        if isinstance(val, Mapping) and isinstance(out.get(key), Mapping):
            out[key] = merge_config(val, out[key])
        else:
            out[key] = deepcopy(val)
    return out
