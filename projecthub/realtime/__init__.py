from .registry import ChannelRegistry as ChannelRegistry, Subscriber as Subscriber
