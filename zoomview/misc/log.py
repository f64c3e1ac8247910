#
# log.py -- logger set up for the zoomview command
#
# This is open-source software licensed under a BSD license.
# Please see the file LICENSE.txt for details.
#
import logging
import logging.handlers

LOG_FORMAT = '%(asctime)s | %(levelname)1.1s | %(filename)s:%(lineno)d (%(funcName)s) | %(message)s'

# rotate the log file at this size, keeping this many old ones
log_maxsize = 20 * 1024 * 1024
log_backups = 4


class NullLogger(object):
    """Drop-in for a logger that discards everything.  Only the levels
    zoomview logs at are provided.
    """

    def debug(self, msg):
        pass

    def warning(self, msg):
        pass

    def error(self, msg):
        pass


def get_logger(name='zoomview', options=None):
    """Make a logger configured from the command line `options` made
    by `addlogopts()`.  With no options the logger has no handlers and
    only passes warnings and errors.
    """
    if options is None:
        logger = logging.Logger(name)
        logger.setLevel(logging.WARNING)
        return logger

    if options.nulllogger:
        return NullLogger()

    logger = logging.Logger(name)
    logger.setLevel(options.loglevel)
    fmt = logging.Formatter(LOG_FORMAT)

    handlers = []
    if options.logfile is not None:
        handlers.append(logging.handlers.RotatingFileHandler(
            options.logfile, maxBytes=options.logsize,
            backupCount=options.logbackups))
    if options.logstderr:
        handlers.append(logging.StreamHandler())

    for hdlr in handlers:
        hdlr.setLevel(options.loglevel)
        hdlr.setFormatter(fmt)
        logger.addHandler(hdlr)

    return logger


def addlogopts(parser):
    """Add the logging options to an `argparse` parser."""
    add_argument = parser.add_argument

    add_argument("--log", dest="logfile", metavar="FILE",
                 help="Write logging output to FILE")
    add_argument("--loglevel", dest="loglevel", metavar="LEVEL",
                 default=logging.WARNING, type=int,
                 help="Set logging level to LEVEL (10 shows gestures)")
    add_argument("--lognull", dest="nulllogger", default=False,
                 action="store_true",
                 help="Use a null logger")
    add_argument("--logsize", dest="logsize", metavar="NUMBYTES",
                 type=int, default=log_maxsize,
                 help="Rotate the log file at NUMBYTES")
    add_argument("--logbackups", dest="logbackups", metavar="NUM",
                 type=int, default=log_backups,
                 help="Keep NUM rotated log files")
    add_argument("--stderr", dest="logstderr", default=False,
                 action="store_true",
                 help="Copy logging also to stderr")

#END
