


class CalcError(Exception):
    def __init__(self, message, code="9999", equation=None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.equation = equation

class EvaluationError(CalcError):
    pass

class PersistenceError(CalcError):
    pass

class AiError(CalcError):
    pass

class AiTransportError(AiError):
    pass

class AiParseError(AiError):
    pass



Error_Dictionary= {

    "1" : "Missing Files",
    "2" : "Scientific Calculation Error",
    "3" : "Calculator Error",
    "4" : "UI Error",
    "5" : "Storage / Configuration Error",
    "6" : "AI Communication Error",

}

#Error Messages are structured in:
# 1. Digit: Main Error
# 2. Digit: Specification
# 3. and 4. Digit: Error Number



ERROR_MESSAGES = {
    "2000" : "Unknown scientific function: ", # + function name
    "2001" : "Square root of a negative number.",
    "2002" : "Logarithm of a non-positive number.",
    "2003" : "Result is not a finite number.",
    "2004" : "Invalid operand: ", # + operand


    "3000" : "Empty expression.",
    "3001" : "Missing number after operator: ", # + operator
    "3002" : "Missing operator between numbers.",
    "3003" : "Division by Zero",
    "3004" : "Invalid Operator: ", # + operator
    "3008" : "More than one '.' in one number.",
    "3011" : "Unexpected Token: ", # + Token
    "3026" : "Number too big.",


    "5000" : "History storage could not be read: ", # + reason
    "5001" : "History storage could not be written: ", # + reason
    "5002" : "Stored history is corrupt.",


    "6000" : "No API key configured.",
    "6001" : "Request to the AI service failed: ", # + reason
    "6002" : "AI response could not be parsed: ", # + reason
    "6003" : "AI response has the wrong shape: ", # + field


    "9999" : "Unexpected Error: " #+error
}


def describe(error):
    """Render an error the way the calculator reports it, e.g. 'Calculator Error 3003: Division by Zero'."""
    category = Error_Dictionary.get(error.code[:1], "Error")
    text = ERROR_MESSAGES.get(error.code, ERROR_MESSAGES["9999"])
    if text.endswith(": "):
        # Open-ended messages: the raised text already carries the detail
        text = str(error.message)
    return f"{category} {error.code}: {text}"
